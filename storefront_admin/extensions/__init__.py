"""Back-office extensions: bulk product import and background task execution."""
