"""View-side DTOs for the mini program client."""
