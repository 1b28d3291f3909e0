"""YouTube video question answering pipeline.

This package locates a video's caption track, flattens it into a transcript,
bounds it to the model's context budget and hands it, together with the
user's question, to the inference client.
"""
