"""HTTP host exposing one configuration store to other processes."""
