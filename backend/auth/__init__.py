from .gate import AccessGate
from .login_path import LoginPathStore, generate_login_path
from .tokens import Identity, TokenService

__all__ = [
    "AccessGate",
    "Identity",
    "LoginPathStore",
    "TokenService",
    "generate_login_path",
]
