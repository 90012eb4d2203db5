#!/usr/bin/env python3
"""
Dictone Hugging Face Spaces App
Main entry point for the deployed application
"""

from dictone.app.app import DictoneApp, main

__all__ = ["DictoneApp", "main"]


if __name__ == "__main__":
    main()
