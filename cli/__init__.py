"""Text-mode Set: render the table, read one command per line."""
