"""
Pull Request Approval Rewards

A small webhook service that listens for approved pull request reviews,
draws a weighted-random reward for the PR author, and announces it in a
team chat channel.
"""

__version__ = "1.0.0"
__author__ = "PR Rewards Team"
