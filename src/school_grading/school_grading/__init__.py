"""School grading package.

Organized by feature modules (thresholds, assessments) with a thin Flask
controller layer on top of service/repository layers.
"""
