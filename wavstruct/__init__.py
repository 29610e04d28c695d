"""
# wavstruct: WAVE files for humans.

A file format is described as a Chunk, i.e. an ordered collection of fields each
one representing a specific aspect of the binary data (an integer, a string of
bytes, an array of other chunks).

Two basic main operations are defined for a format and its sub components:

 1. unpack(): reading the binary data and build a high-level representation of that.
    The offset used is the actual position of the stream and each field knows
    how many bytes needs to read, possibly depending on another field (see Dependency).

 2. pack(): encode the high-level representation into binary data.

to these we add one more

 3. relayout(): recursively set the offsets of the fields and update the values
    other fields depend on (like a length). Packing implies a relayouting
    if not indicated otherwise.

On top of that are built the RIFF container (wavstruct.containers.riff) and
the PCM WAVE codec (wavstruct.audio.wav) with its read() and write() entry points.
"""
