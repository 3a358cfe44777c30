# Auth package init
"""
Bloglist Backend - Authentication & Authorization
==================================================

    passwords.py      PasswordHasher   (bcrypt via passlib)
    tokens.py         TokenCodec       (signed session tokens via PyJWT)
    identity.py       IdentityResolver (bearer header → Identity)
    authorization.py  ownership checks (Identity × resource → allow/deny)

Data flow for a protected request:
    Authorization header → IdentityResolver → handler → authorize_mutation → store
"""
