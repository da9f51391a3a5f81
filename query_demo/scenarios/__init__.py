"""Statement scenarios against the users and posts tables."""
