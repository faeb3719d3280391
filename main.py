#!/usr/bin/env python3
"""
StatProbe
Polls a server stats endpoint and prints threshold alerts

Configured through STATPROBE_* environment variables, see statprobe/config.py
"""

from statprobe.__main__ import main

if __name__ == "__main__":
    print("📡 StatProbe starting...")
    main()
    print("🛑 StatProbe stopped")
