from .account import Account, AccountView
from .document import Document, RenewalToken
from .post import Post

__all__ = ["Account", "AccountView", "Document", "Post", "RenewalToken"]
