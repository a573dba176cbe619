"""Video Q&A pipeline.

This package fetches a YouTube video's transcript through an Apify scraper run,
uploads it to the Gemini File API, and answers questions about it with Gemini.
"""
