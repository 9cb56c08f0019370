"""Prompt templates for proposition extraction and agentic chunking.

Templates are filled with str.format; literal braces are doubled.
"""

PROPOSITIONS_PROMPT = """Decompose the "Content" into clear and simple propositions, ensuring they are interpretable out of context.

1. Split compound sentences into simple sentences. Maintain the original phrasing from the input whenever possible.
2. For any named entity that is accompanied by additional descriptive information, separate this information into its own distinct proposition.
3. Decontextualize the proposition by adding necessary modifiers to nouns or entire sentences and replacing pronouns (e.g., "it", "he", "she", "they", "this", "that") with the full name of the entities they refer to.
4. Present the results as a JSON array of strings.

Example:
Input: "The earliest evidence for the Easter Hare was recorded in south-west Germany in 1678 by Georg Franck von Franckenau. He was a professor of medicine."

Output: ["The earliest evidence for the Easter Hare was recorded in south-west Germany in 1678 by Georg Franck von Franckenau.", "Georg Franck von Franckenau was a professor of medicine."]

Only respond with a valid JSON array, nothing else.

Decompose the following content:
{content}"""

_STEWARD = (
    "You are the steward of a group of chunks which represent groups of sentences "
    "that talk about a similar topic."
)

_GENERALIZE = """If you get a proposition about apples, generalize it to food.
Or month, generalize it to "date and times"."""

NEW_CHUNK_SUMMARY_PROMPT = _STEWARD + """
You should generate a very brief 1-sentence summary which will inform viewers what a chunk group is about.

A good summary will say what the chunk is about, and give any clarifying instructions on what to add to the chunk.

You will be given a proposition which will go into a new chunk. This new chunk needs a summary.

Your summaries should anticipate generalization. """ + _GENERALIZE + """

Example:
Input: Proposition: Greg likes to eat pizza
Output: This chunk contains information about the types of food Greg likes to eat.

Only respond with the new chunk summary, nothing else.

Determine the summary of the new chunk that this proposition will go into:
{proposition}"""

NEW_CHUNK_TITLE_PROMPT = _STEWARD + """
You should generate a very brief few word chunk title which will inform viewers what a chunk group is about.

A good chunk title is brief but encompasses what the chunk is about.

You will be given a summary of a chunk which needs a title.

Your titles should anticipate generalization. """ + _GENERALIZE + """

Example:
Input: Summary: This chunk is about dates and times that the author talks about
Output: Date & Times

Only respond with the new chunk title, nothing else.

Determine the title of the chunk that this summary belongs to:
{summary}"""

UPDATE_SUMMARY_PROMPT = _STEWARD + """
A new proposition was just added to one of your chunks, you should generate a very brief 1-sentence summary which will inform viewers what a chunk group is about.

A good summary will say what the chunk is about, and give any clarifying instructions on what to add to the chunk.

You will be given a group of propositions which are in the chunk and the chunks current summary.

Your summaries should anticipate generalization. """ + _GENERALIZE + """

Example:
Input: Proposition: Greg likes to eat pizza
Output: This chunk contains information about the types of food Greg likes to eat.

Only respond with the chunk new summary, nothing else.

Chunk's propositions:
{propositions}

Current chunk summary:
{summary}"""

UPDATE_TITLE_PROMPT = _STEWARD + """
A new proposition was just added to one of your chunks, you should generate a very brief updated chunk title which will inform viewers what a chunk group is about.

A good title will say what the chunk is about.

You will be given a group of propositions which are in the chunk, chunk summary and the chunk title.

Your title should anticipate generalization. """ + _GENERALIZE + """

Example:
Input: Summary: This chunk is about dates and times that the author talks about
Output: Date & Times

Only respond with the new chunk title, nothing else.

Chunk's propositions:
{propositions}

Chunk summary:
{summary}

Current chunk title:
{title}"""

FIND_CHUNK_PROMPT = """Determine whether or not the "Proposition" should belong to any of the existing chunks.

A proposition should belong to a chunk if their meaning, direction, or intention are similar.
The goal is to group similar propositions and chunks.

If you think a proposition should be joined with a chunk, return the chunk id.
If you do not think an item should be joined with an existing chunk, just return "No chunks"

Example:
Input:
    - Proposition: "Greg really likes hamburgers"
    - Current Chunks:
        - Chunk ID: 2n4l3d
        - Chunk Name: Places in San Francisco
        - Chunk Summary: Overview of the things to do with San Francisco Places

        - Chunk ID: 93833k
        - Chunk Name: Food Greg likes
        - Chunk Summary: Lists of the food and dishes that Greg likes
Output: 93833k

Current Chunks:
--Start of current chunks--
{outline}
--End of current chunks--

Determine if the following statement should belong to one of the chunks outlined:
{proposition}"""
