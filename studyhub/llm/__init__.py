"""
Text-generation layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Send free-form tutoring prompts and return the generated text.
- Report failures as an unsuccessful result instead of raising.
"""
