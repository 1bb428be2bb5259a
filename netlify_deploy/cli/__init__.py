"""Command-line interface for netlify-deploy"""
