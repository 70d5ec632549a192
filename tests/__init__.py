"""
Test suite for gaia-manager.

- Unit tests for the classifier, tagger, catalog, compatibility gate,
  override ritual, runtime, chat session, navigator, screens and settings
- End-to-end tests for complete command flows
"""
