"""Engine built-ins and third-party script frameworks."""
