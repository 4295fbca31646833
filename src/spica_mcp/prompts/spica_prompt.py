from mcp.server.fastmcp import FastMCP


WORKFLOW_GUIDE = """**WORKFLOW - READ THIS FIRST**

**STEP 1: SEARCH DOCUMENTATION**
- Use the "search" tool with relevant keywords (e.g. "bucket creation", "identity management", "API endpoints").
- This finds the relevant documentation files in the knowledge base.
- Never skip this step: the documentation is constantly updated.

**STEP 2: GET SPECIFIC ANSWERS**
- Use the "answer_question" tool with your specific question.
- It searches the docs, picks the most relevant document and answers from it.
- Example: "How do I create a bucket with validation rules?"

**STEP 3: EXECUTE SPICA OPERATIONS**
- Only after consulting documentation, use the bucket-*, passport-* and function-* tools.
- Use the exact parameters and structure learned from the documentation.

**NEVER DO THIS:**
- Don't use Spica tools without first checking documentation.
- Don't assume API structure; verify with search/answer_question.
- Don't guess parameter names or required fields.

**EXAMPLE WORKFLOW:**
1. search("bucket creation validation")
2. answer_question("What are the required fields for creating a bucket?")
3. bucket-create (with the parameters learned from the docs)

**Remember: documentation first, operations second!**"""


def register_prompts(mcp: FastMCP) -> None:
    @mcp.prompt(
        name="spica-docs-first",
        description=(
            "Documentation-first workflow for operating a Spica instance: search the docs, "
            "ask answer_question, then call bucket/passport/function tools."
        ),
    )
    def spica_docs_first_prompt() -> str:
        return WORKFLOW_GUIDE
