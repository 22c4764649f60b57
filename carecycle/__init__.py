"""CareCycle - recurring patient care scheduling API"""
