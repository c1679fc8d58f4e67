"""
Receivers: consumers of the duplicate-group channel.
The scanner never imports this package; any object with run(channel) will do.
"""

from .listing import ListingReceiver, CollectingReceiver
from .prompt import PromptReceiver
from .keep_one import KeepOneReceiver

__all__ = ["ListingReceiver", "CollectingReceiver", "PromptReceiver", "KeepOneReceiver"]
