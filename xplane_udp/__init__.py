"""Client for the X-Plane UDP control protocol."""
