"""Services package: exercise generation and grading, inference client."""
