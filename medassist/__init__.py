"""
Medical assistance account service.
"""
