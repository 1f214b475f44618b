from gqlcheck.logger import get_logger

__author__ = """gqlcheck contributors"""
__version__ = "0.3.0"

log = get_logger("gqlcheck")
