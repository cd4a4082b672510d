"""
Screenshot Upload Domain

Watches the RuneLite screenshot directory and delivers each new screenshot
to a Discord channel exactly once:
- classifier.py - Filename parsing into a category label
- scanner.py - Oldest-first directory listing
- ledger.py - Persisted record of delivered screenshots
- destinations.py - Category to channel resolution
- messenger.py - Messaging collaborator interface and Discord adapter
- dispatcher.py - Single-file delivery and sequential batches
- scheduler.py - Periodic and one-shot batch execution
"""

__all__ = [
    "classifier",
    "destinations",
    "dispatcher",
    "ledger",
    "messenger",
    "scanner",
    "scheduler",
]
