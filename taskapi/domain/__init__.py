"""Domain records and validation rules for Users and Tasks."""
