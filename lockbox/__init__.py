"""Lockbox - encrypted local password vault."""

__version__ = "1.0.0"
__all__ = ["__version__"]


def check_dependencies():
    """Raise ImportError naming every critical dependency that is missing."""
    import importlib.util

    required = {
        "cryptography": "cryptography",
        "argon2": "argon2-cffi",
        "platformdirs": "platformdirs",
        "psutil": "psutil",
    }
    missing = [dist for mod, dist in required.items() if importlib.util.find_spec(mod) is None]
    if missing:
        raise ImportError(
            "Missing dependencies -> " + ", ".join(missing)
            + ". Install with:  pip install " + " ".join(missing)
        )
