#!/usr/bin/env python3
"""
Local server for NailArt AI

This script runs the app locally for development and testing.

Usage:
    python local_server.py

This will start the server at http://localhost:8000
"""
import os
import sys

import uvicorn
from dotenv import load_dotenv

load_dotenv()

# Set host to 0.0.0.0 to make it accessible from other devices on the network
if __name__ == '__main__':
    print("Starting local server for NailArt AI")
    print(f"Python version: {sys.version}")

    # Check Supabase settings
    if not os.environ.get("SUPABASE_URL") or not os.environ.get("SUPABASE_ANON_KEY"):
        print("\nWARNING: SUPABASE_URL / SUPABASE_ANON_KEY are not set!")
        print("Sign-in and history will not work.\n")

    # Check the image API key
    if not os.environ.get("GEMINI_API_KEY"):
        print("\nWARNING: GEMINI_API_KEY environment variable is not set!")
        print("Thumbnail generation will not work.\n")

    if not os.environ.get("SESSION_SECRET_KEY"):
        print("\nWARNING: SESSION_SECRET_KEY is not set!")
        print("Sessions cannot be stored.\n")

    print("\nStarting server at http://localhost:8000")
    print("Press Ctrl+C to stop the server")
    uvicorn.run("nailart.index:app", host='0.0.0.0', port=8000, reload=True)
