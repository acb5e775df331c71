"""Old branch pruning tool.

Features:
- Find branches with no commits missing from a base branch
- Act on local branches, remote branches, or both
- Restrict remote work to specific remotes
- Include and exclude branches by regular expression
- List, ask before deleting, or delete outright
"""

__version__ = "0.1.0"
