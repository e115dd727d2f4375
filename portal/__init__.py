"""
Internship Portal
Identity and profile backend for a job/internship portal.

Architecture:
- MongoDB: User identity records with nested profiles
- Cloudinary: Resumes and profile photos
- Google Sign-In: Federated login (ID token verification only)
- Socket.IO: Per-application chat rooms, no persistence
"""

__version__ = "1.0.0"
