"""Reading matrices from delimited text files."""
