"""
FitCoach - personal fitness and nutrition coaching.

Packages:
- fitcoach: application shell (settings, logging, CLI, web app)
- onboarding: new-user onboarding wizard
"""

__version__ = "0.1.0"
