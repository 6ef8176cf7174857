"""Privilege-elevation building blocks: sudo and su option parsing, sudoers defaults, environment filtering, command resolution, logging and process backchannels."""

__version__ = "0.1.0"