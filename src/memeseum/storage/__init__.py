"""Durable meme storage: primary record store + museum index.

Layout:
    ~/.memeseum/data/
    ├── memes/
    │   └── 1739870123.md              # One meme per file, YAML frontmatter
    └── museums/
        ├── classic.md                 # name, seq, ordered meme ids
        └── classic-2.md               # Slug collision, real name in frontmatter

Both namespaces are read once at startup and written through on every insert.
"""
