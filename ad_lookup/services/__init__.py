from .auth import AuthResult, authenticate, split_login

__all__ = ["AuthResult", "authenticate", "split_login"]
