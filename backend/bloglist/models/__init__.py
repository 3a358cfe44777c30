# Models package init
# Importing this package registers every table on Base.metadata
from bloglist.models.account import Account, AccountPost
from bloglist.models.post import Post

__all__ = ["Account", "AccountPost", "Post"]
