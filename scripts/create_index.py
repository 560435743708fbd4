#!/usr/bin/env python
"""Create the auto-embedding vector search index.

Usage:
    python -m scripts.create_index --uri mongodb://localhost:27020/wikipedia
"""

from autoembed.provisioner import main

if __name__ == "__main__":
    main()
