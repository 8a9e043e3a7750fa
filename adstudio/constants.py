# adstudio/constants.py
from typing import Dict, List, Optional

from adstudio.schemas import AspectRatio, ImageResolution

PRESET_PROMPTS: List[Dict[str, str]] = [
    {
        "name": "Luxury product showcase",
        "prompt": "A luxurious, refined studio shot of the product with soft directional light that brings out its premium features. The product rests on a minimal glossy surface that reflects it, set against a rich, deep color gradient. Add a delicate hint of mist or vapor for an ethereal feel. The product is centered and in perfect focus.",
    },
    {
        "name": "Fresh, nature inspired",
        "prompt": "The product placed in a vivid natural setting, surrounded by lush greenery and crystal clear water droplets. Gentle sunlight filters through the leaves, creating a clean and refreshing atmosphere. Emphasize organic textures and a sense of natural purity. The product should feel fresh and close to nature.",
    },
    {
        "name": "Modern minimalist",
        "prompt": "A clean, modern, minimalist composition with the product on a pure white or light grey background. Use geometric shapes and subtle shadows to create depth. The product is the only focal point, with crisp details and an understated elegance. Even, bright lighting.",
    },
    {
        "name": "Dynamic action shot",
        "prompt": "The product in an energetic, dynamic environment that suggests motion and performance: splashing water, flying particles or a motion-blurred background conveying speed. Use strong, dramatic lighting for visual impact. The product should communicate power and performance.",
    },
    {
        "name": "Cozy at home",
        "prompt": "A warm, inviting scene with the product integrated into a cozy home space. Soft, diffused light from a window or lamp. Textures of natural wood, soft fabrics or warm ceramics. Create a feeling of comfort, relaxation and everyday luxury. The product should feel approachable and essential.",
    },
    {
        "name": "Futuristic augmented reality",
        "prompt": "The product presented in a sophisticated augmented reality environment with glowing, interactive 3D graphic overlays. Translucent virtual interface panels float in the space, highlighting key features. Electric blue and neon purple light creates a high-tech atmosphere. The product looks like a perfect virtual object integrated into the real world.",
    },
    {
        "name": "Interactive virtual try-on",
        "prompt": "The product appears as a virtual try-on item on a person interacting with it, through a mirror display or in mid-air. Emphasize how seamless and realistic the digital experience is. The background is a clean, modern studio with soft light, focused on the connection between the user and the virtual product.",
    },
    {
        "name": "Interactive product display",
        "prompt": "The product stands on a digital display pedestal where information, motion graphics and product highlights appear and transform around it. Focused lighting highlights the product's innovation. The background is a minimal tech exhibition space with clean lines and ambient light.",
    },
    {
        "name": "Sustainable, eco-friendly tech",
        "prompt": "A modern tech product presented in a green, organic setting that evokes sustainability and environmental responsibility. Recycled materials, plants or natural sunlight may appear. Earth tones and greens dominate. The product should look in harmony with nature while staying advanced.",
    },
    {
        "name": "Minimal digital design",
        "prompt": "An ultra-minimal composition where the product is perfectly lit and stands out on a glossy monochrome surface. Carefully shaped soft shadows create depth. Only basic lines and shapes are used. Strong focused light brings out every small detail, showing the craftsmanship of the digital design.",
    },
]

IMAGE_RESOLUTION_PRESETS: Dict[AspectRatio, Dict[ImageResolution, str]] = {
    AspectRatio.SQUARE: {ImageResolution.R2K: "2048x2048 px", ImageResolution.R4K: "4096x4096 px", ImageResolution.R8K: "8192x8192 px"},
    AspectRatio.PORTRAIT_3_4: {ImageResolution.R2K: "1536x2048 px", ImageResolution.R4K: "3072x4096 px", ImageResolution.R8K: "6144x8192 px"},
    AspectRatio.LANDSCAPE_4_3: {ImageResolution.R2K: "2048x1536 px", ImageResolution.R4K: "4096x3072 px", ImageResolution.R8K: "8192x6144 px"},
    AspectRatio.PORTRAIT_9_16: {ImageResolution.R2K: "1152x2048 px", ImageResolution.R4K: "2304x4096 px", ImageResolution.R8K: "4608x8192 px"},
    AspectRatio.LANDSCAPE_16_9: {ImageResolution.R2K: "2048x1152 px", ImageResolution.R4K: "4096x2304 px", ImageResolution.R8K: "8192x4608 px"},
}

def find_preset(name: str) -> Optional[Dict[str, str]]:
    for preset in PRESET_PROMPTS:
        if preset["name"] == name:
            return preset
    return None
