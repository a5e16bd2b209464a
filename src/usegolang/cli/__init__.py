"""
use-golang command line interface
"""
