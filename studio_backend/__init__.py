"""Studio admin backend: Google Sheets as database, Google Drive for images."""
