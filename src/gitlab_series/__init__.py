"""Mirror GitLab merge requests into local git-series branches."""

__version__ = "0.1.0"
