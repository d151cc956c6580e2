"""HTTP API for uploading media and receiving formatted transcripts."""
