"""Git workflow automator.

Features:
- Start feature, hotfix and release branches with configured prefixes
- Sync branches with their remote counterparts (rebase or merge)
- Clean up branches already merged into main
- Conventional commits and pull request creation
- Semantic version tagging
- Bisect, undo, standup, stats and status helpers
"""

__version__ = "0.1.0"
