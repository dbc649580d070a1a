"""Remote call policy, OpenAI clients and the processing pipeline."""
