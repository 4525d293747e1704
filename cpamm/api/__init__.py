"""HTTP harness for driving a pool from outside the process."""
