"""
Chat app for listing-scoped conversations between renters and owners.

This app handles:
- Threads: one per (participant pair, listing), with per-participant
  unread counters and hide markers
- Message posting and history
- Thread deletion (hide for one side, purge once both sides delete)
- WebSocket delivery of new messages, read receipts and inbox pings

Related apps:
    - authentication: User model and Firebase principal resolution
    - listings: Listing the conversation is about

WebSocket Support:
    Uses Django Channels for real-time delivery.
    See consumers.py for the WebSocket consumer.
    See realtime.py for group names and server-side emission.

Usage:
    from chat.services import ChatService

    # First message to an owner about a listing creates the thread
    view = ChatService.post_message(
        principal,
        owner.firebase_uid,
        "Is the room still available?",
        listing_id=listing.pk,
    )

    # Reply in the existing thread
    ChatService.post_message(principal, renter.pk, "Yes!", thread_id=view.chat_id)
"""
