"""Canned remediation and chat copy."""

from __future__ import annotations

from typing import Dict

from models.records import FaultStatus

WELCOME_MESSAGE = (
    "Hello! I'm your Self Healing PCB Assistant. I can help you with:\n\n"
    "- Hardware connection details\n"
    "- Real-time sensor readings\n"
    "- Fault diagnosis and solutions\n"
    "- System troubleshooting\n"
    "- Performance optimization\n\n"
    "What would you like to know about your PCB system?"
)

SUGGESTED_QUESTIONS = (
    "What's the current system status?",
    "Show hardware connection details",
    "Diagnose current faults",
    "How to fix voltage issues?",
    "Temperature troubleshooting",
    "System optimization tips",
)

FAULT_SOLUTIONS: Dict[FaultStatus, str] = {
    FaultStatus.voltage_drop: """\
**Solutions for Voltage Drop:**

1. **Check Power Supply**
   - Verify 3.3V power source stability
   - Measure input voltage with multimeter
   - Check for loose connections

2. **Inspect PCB Traces**
   - Look for damaged traces
   - Check solder joints
   - Verify component placement

3. **Component Testing**
   - Test voltage regulators
   - Check capacitor values
   - Verify load current

4. **Immediate Actions**
   - Reduce system load
   - Check for short circuits
   - Monitor temperature""",
    FaultStatus.overheated: """\
**Solutions for Overheating:**

1. **Immediate Cooling**
   - Apply thermal paste if needed
   - Ensure proper ventilation
   - Reduce processor load

2. **Hardware Inspection**
   - Check heatsink attachment
   - Verify fan operation
   - Inspect for dust buildup

3. **Power Management**
   - Reduce clock speeds temporarily
   - Check for stuck processes
   - Monitor power consumption

4. **Long-term Solutions**
   - Improve airflow design
   - Consider better heatsink
   - Optimize power settings""",
    FaultStatus.broken_trace: """\
**Solutions for Broken Trace:**

1. **Visual Inspection**
   - Use magnifying glass
   - Check under good lighting
   - Look for physical damage

2. **Continuity Testing**
   - Use multimeter continuity mode
   - Test trace end-to-end
   - Check adjacent traces

3. **Repair Methods**
   - Jumper wire repair
   - Conductive epoxy
   - Trace rebuilding

4. **Prevention**
   - Avoid mechanical stress
   - Proper PCB handling
   - Environmental protection""",
    FaultStatus.normal: """\
**System is Operating Normally**

**Maintenance Tips:**
- Regular voltage monitoring
- Keep system clean
- Update firmware regularly
- Monitor temperature trends
- Backup configuration settings""",
}

GENERAL_TROUBLESHOOTING = """\
**General Troubleshooting:**

1. **System Reset**
   - Power cycle the hardware
   - Reset to factory settings
   - Check firmware version

2. **Connection Check**
   - Verify all cables
   - Test different ports
   - Check signal integrity

3. **Diagnostic Tools**
   - Use multimeter for measurements
   - Check with oscilloscope
   - Monitor system logs"""

OPTIMIZATION_TIPS = """\
**System Optimization Tips:**

1. **Power Optimization**
   - Use efficient voltage regulators
   - Implement sleep modes
   - Optimize clock speeds

2. **Thermal Management**
   - Improve PCB layout for heat dissipation
   - Add thermal vias
   - Use appropriate copper weight

3. **Signal Integrity**
   - Proper grounding techniques
   - Decoupling capacitor placement
   - Trace width optimization

4. **Monitoring**
   - Implement predictive maintenance
   - Set up alert thresholds
   - Regular calibration checks"""

GENERAL_HELP = (
    "I understand you're asking about the PCB system. I can help you with:\n\n"
    "- Current system status and readings\n"
    "- Hardware connection details\n"
    "- Fault diagnosis and repair solutions\n"
    "- System optimization tips\n"
    "- Simulation control\n\n"
    "Try asking about specific issues like voltage problems, overheating, "
    "or connection status.\n\n"
    '*Try using more specific keywords like "voltage", "temperature", or '
    '"connection" for better assistance.*'
)


def solutions_for(fault_status: FaultStatus | str | None) -> str:
    """Long-form repair guide for a fault, or the general guide when unknown."""
    try:
        key = FaultStatus(fault_status)
    except ValueError:
        return GENERAL_TROUBLESHOOTING
    return FAULT_SOLUTIONS.get(key, GENERAL_TROUBLESHOOTING)
