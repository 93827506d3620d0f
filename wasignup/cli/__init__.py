"""
wasignup command line interface.
"""
