"""Static showcase pages for GitHub projects with GitHub-style README rendering."""

__version__ = "0.1.0"
