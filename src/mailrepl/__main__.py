from mailrepl.cli import main

main()
