"""Book API: authors and their books behind JWT authentication."""
