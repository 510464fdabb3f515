SUMMARY_SYSTEM_PROMPT = (
    "You are a professional meeting notes summarizer. Create clear, "
    "well-structured summaries based on the user's specific instructions."
)

SUMMARY_USER_PROMPT = """Please process this meeting transcript according to \
the following instructions: "{prompt}"

Transcript:
{transcript}"""

DEFAULT_EMAIL_TITLE = "AI-Generated Summary"

EMAIL_HTML_TEMPLATE = """
<html>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
    <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
      <h1 style="color: #2563eb; border-bottom: 2px solid #e5e7eb; padding-bottom: 10px; margin-bottom: 20px;">
        {title}
      </h1>

      <div style="background: #f8fafc; padding: 15px; border-radius: 8px; margin: 20px 0;">
        <p><strong>Generated on:</strong> {date}</p>
        <p><strong>Summary Instructions:</strong> {prompt}</p>
      </div>

      <div style="background: white; padding: 20px; border: 1px solid #e5e7eb; border-radius: 8px;">
        <h2 style="color: #374151; margin-top: 0;">Summary</h2>
        <div style="white-space: pre-wrap; font-size: 14px; line-height: 1.6;">
          {body}
        </div>
      </div>

      <div style="margin-top: 30px; padding: 15px; background: #f1f5f9; border-radius: 8px; text-align: center; font-size: 12px; color: #64748b;">
        <p>This summary was generated using AI-powered meeting notes summarizer.</p>
      </div>
    </div>
  </body>
</html>
"""
