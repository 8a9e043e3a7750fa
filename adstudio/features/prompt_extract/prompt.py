# adstudio/features/prompt_extract/prompt.py
EXTRACT_INSTRUCTION = (
    "Analyze this product image. Describe the product, its key features, its packaging and the "
    "visual effects that would suit a high-quality advertising campaign. Focus on lighting, "
    "background, composition and emotion. Write a detailed, compelling prompt (about 200-300 words) "
    "for an image generation AI, aiming for an elegant and impactful visual. Take current "
    "advertising trends for similar products into account."
)
