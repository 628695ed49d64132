"""Link checker: finds the links in blog posts and reports their live status."""

__version__ = "0.1.0"
