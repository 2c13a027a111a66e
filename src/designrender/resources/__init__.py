from importlib import resources

__all__ = ["base_css", "debug_css"]


def base_css() -> str:
    """Return the bundled base.css content as a string."""
    return resources.files("designrender.resources").joinpath("base.css").read_text()


def debug_css() -> str:
    """Return the bundled debug.css content as a string."""
    return resources.files("designrender.resources").joinpath("debug.css").read_text()
