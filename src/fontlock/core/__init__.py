"""Configuration, transport and error primitives shared by the pipeline."""
