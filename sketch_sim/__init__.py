"""Host runtime for interactive drawing sketches."""
