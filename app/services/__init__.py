"""
Services layer - data access against Firestore and Firebase Authentication.
One service per entity (users, posts, reminders, ppas), plus the identity
service, live query subscriptions and the profile cache.

DESIGN PRINCIPLE:
- Services contain the reads and writes, NOT routes
- Services raise app.core.errors types; routes turn them into responses
"""
