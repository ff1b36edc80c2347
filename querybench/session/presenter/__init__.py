"""Result paging, formatting and export."""
