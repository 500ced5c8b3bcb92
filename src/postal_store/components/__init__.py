"""Store components: codec, framing, writer, reader, index, lookup."""
