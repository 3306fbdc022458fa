from .providers import GoogleOAuthProvider, build_oauth_providers

__all__ = ["GoogleOAuthProvider", "build_oauth_providers"]
